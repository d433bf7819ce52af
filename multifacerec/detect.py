import cv2
from .camera import open_camera
from .recognize.detector import HaarFaceDetector
from .recognize.pipeline import draw_face, prepare_frame

def main():
     try:
          det = HaarFaceDetector(detect_eyes=True)
          cap = open_camera(0)
     except RuntimeError as e:
          print(f"[detect] {e}")
          return

     print("Haar face + eye detect. Press 'q' to quit.")
     try:
          while True:
               ok, frame = cap.read()
               if not ok:
                    break

               vis = prepare_frame(frame)
               for f in det.detect(vis):
                    draw_face(vis, f, "")

               cv2.imshow("Face Detection", vis)
               if (cv2.waitKey(1) & 0xFF) == ord("q"):
                    break    
     finally:
          cap.release()
          cv2.destroyAllWindows()


if __name__ == "__main__":
     main()
